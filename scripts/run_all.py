from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path
from typing import List, Optional


def _project_root_from_this_file(this_file: Path) -> Path:
    # scripts/run_all.py -> project root is parent of "scripts"
    return this_file.resolve().parents[1]


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Simulate raw data (optional) and compute uplift marts.")
    parser.add_argument(
        "--skip-generate",
        action="store_true",
        help="Reuse data/raw/activities.csv and data/raw/daily_metrics.csv as delivered by ingestion.",
    )
    args = parser.parse_args(argv)

    project_root = _project_root_from_this_file(Path(__file__))

    # Ensure imports work regardless of where you run the command from
    sys.path.insert(0, str(project_root))

    steps = ["scripts.01_compute_reports"]
    if not args.skip_generate:
        steps.insert(0, "scripts.00_generate_data")

    for name in steps:
        importlib.import_module(name).main()

    print("\n✅ Pipeline complete.")
    print("Next:")
    print("  streamlit run app/app.py")


if __name__ == "__main__":
    main()
