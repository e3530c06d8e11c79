"""
Lotmap Example: Parking Map Export
======================================================================================================

This example converts an AutoCAD CSV export of a parking floor into render-ready
geometry and writes the annotated map JSON.

The workflow includes:
1. Loading the CSV export in the background (a newer upload cancels an older one)
2. Parsing, grouping and classifying every entity by layer
3. Fitting the map to the canvas width and building geometry descriptors
4. Exporting the descriptors as map JSON

Input:      examples/sample_lot.csv (or the path given as the first argument)
Output:     outputs/export/<csv stem>.json
"""

# fmt: off
# autopep8: off

# Lotmap imports
from lotmap import (
    MapPipeline,
    EmptyDatasetError,
    DegenerateBoundsError,
    export_map,
    write_map_json,
    group_by_layer,
    get_layer_summary,
    load_csv_async,
    config,
)

# Standard library imports
import logging
import sys
from pathlib import Path

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s",
)


def parking_map_export(csv_path: Path) -> int:

    settings = config.PipelineSettings.from_env()

    request = load_csv_async(csv_path)
    csv_text = request.result()
    if csv_text is None:
        print("Load cancelled, nothing to do.")
        return 0

    try:
        result = MapPipeline(csv_text, settings=settings).run()
    except (EmptyDatasetError, DegenerateBoundsError) as e:
        print(f"No elements created: {e}")
        return 1

    summary = get_layer_summary(group_by_layer(result.entities))
    print(f"{'LAYER':<30} {'ENTITIES':>10}")
    print("-" * 41)
    for layer in group_by_layer(result.entities):
        print(f"{layer.layer:<30} {layer.count:>10}")
    print("-" * 41)
    print(f"{'TOTAL':<30} {summary.total_entities:>10}")
    print(f"Elements created: {len(result.elements)} (scale {result.scale:.6f})")

    for message in result.diagnostics:
        print(f" [!] {message}")

    data = export_map(result.elements, {"lotName": csv_path.stem})
    write_map_json(data, config.EXPORT_DIR / f"{csv_path.stem}.json")
    return 0


if __name__ == "__main__":
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else config.EXAMPLES_DIR / "sample_lot.csv"
    sys.exit(parking_map_export(path))
