"""Report file writers."""

from pathlib import Path

import structlog

from tradeboard.libraries.performance.models import ProcessedMetrics

logger = structlog.get_logger(__name__)


def write_json_report(metrics: ProcessedMetrics, output_path: Path | str) -> Path:
    """
    Write processed metrics to a JSON file.

    Decimal values are written as strings so no precision is lost. Parent
    directories are created as needed and an existing file is overwritten.

    Args:
        metrics: Processed strategy metrics
        output_path: Destination .json file

    Returns:
        The path written
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", encoding="utf-8") as f:
        f.write(metrics.model_dump_json(indent=2))

    logger.info("report.json_written", path=str(output_path), round_trips=metrics.round_trip_count)
    return output_path
