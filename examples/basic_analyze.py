from adhook_analyzer.pipeline import run_analysis


def main():
    # Local run against the test fixture, no ad library access needed
    print("Running hook and observation analysis on local fixture...")
    analysis = run_analysis(local_file_json="../tests/fixtures/sample_ads.json")

    for group in analysis.hookGroups:
        print(f"{group.totalReach:>10,.0f}  x{group.frequency}  {group.hookText}")

    for obs in analysis.observations:
        print(f"[{obs.magnitude:5.1f}] {obs.title}: {obs.description}")

    with open("example_output.json", "w", encoding="utf-8") as f:
        f.write(analysis.model_dump_json(indent=2))

    print("Saved example_output.json")


if __name__ == "__main__":
    main()
