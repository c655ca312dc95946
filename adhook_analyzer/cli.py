import argparse
import sys
import json
from .cleaner import clean_ad_records
from .hooks import extract_hook, normalize_hook, extract_hooks_from_ads
from .pipeline import load_ads_file, run_analysis
from .types import BrandMetricsSnapshot


def _write_output(output_json: str, path: str, label: str) -> None:
    if path:
        with open(path, "w", encoding="utf-8") as f:
            f.write(output_json)
        print(f"Saved {label} to {path}")
    else:
        print(output_json)


def main():
    parser = argparse.ArgumentParser(
        description="Ad Hook Extraction & Competitive Observation Analyzer"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Command: hook
    hook_parser = subparsers.add_parser(
        "hook", help="Extract the hook and comparison key from a single text"
    )
    hook_parser.add_argument("--text", type=str, required=True, help="Ad creative text")

    # Command: hooks
    hooks_parser = subparsers.add_parser(
        "hooks", help="Group the hooks of every ad in a JSON file"
    )
    hooks_parser.add_argument(
        "--file", type=str, required=True, help="Path to local JSON file of ads"
    )
    hooks_parser.add_argument(
        "--output", type=str, help="Path to save JSON hook groups (optional)"
    )

    # Command: analyze
    ana_parser = subparsers.add_parser(
        "analyze", help="Hook groups plus competitive observations for one brand"
    )
    ana_parser.add_argument(
        "--file", type=str, required=True, help="Path to local JSON file of ads"
    )
    ana_parser.add_argument(
        "--snapshot",
        type=str,
        help="Path to a JSON metrics snapshot (skips building one from the ads)",
    )
    ana_parser.add_argument(
        "--total-ads",
        type=int,
        help="Total ads found for the brand, if more than the file holds",
    )
    ana_parser.add_argument(
        "--output", type=str, help="Path to save JSON analysis output (optional)"
    )

    args = parser.parse_args()

    if args.command == "hook":
        hook = extract_hook(args.text)
        print(json.dumps({"hookText": hook, "normalizedKey": normalize_hook(hook)}, indent=2))

    elif args.command == "hooks":
        try:
            raw_ads, _ = load_ads_file(args.file)
            groups = extract_hooks_from_ads(clean_ad_records(raw_ads))
            output_json = json.dumps([g.model_dump() for g in groups], indent=2)
            _write_output(output_json, args.output, "hook groups")
        except Exception as e:
            print(f"Hook extraction failed: {e}", file=sys.stderr)
            sys.exit(1)

    elif args.command == "analyze":
        try:
            snapshot = None
            if args.snapshot:
                with open(args.snapshot, "r", encoding="utf-8") as f:
                    snapshot = BrandMetricsSnapshot.model_validate(json.load(f))

            analysis = run_analysis(
                local_file_json=args.file,
                snapshot=snapshot,
                total_ads_found=args.total_ads,
            )
            _write_output(analysis.model_dump_json(indent=2), args.output, "analysis")
        except Exception as e:
            print(f"Analysis failed: {e}", file=sys.stderr)
            sys.exit(1)

    else:
        parser.print_help()


if __name__ == "__main__":
    main()
