"""JSON exporter."""
import json
import logging
from pathlib import Path
from typing import List, Union

from explain_k8s.schema.models import ExplainReport, ExplanationNode

logger = logging.getLogger(__name__)


class JsonExporter:
    """Export explanation forests to JSON."""

    def __init__(self, indent: int = 2):
        self.indent = indent

    def export(self, output_file: Union[str, Path], explanations: List[ExplanationNode]) -> Path:
        """Write the forest as a JSON array, one nested object per resource."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        data = [explanation.to_dict() for explanation in explanations]

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=self.indent, ensure_ascii=False)

        logger.info(f"Saved {len(explanations)} explanations to {output_file}")
        return output_file

    def export_report(self, output_file: Union[str, Path], report: ExplainReport) -> Path:
        """Write the run report (failed resources, field warnings) as JSON."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(report.to_dict(), f, indent=self.indent, ensure_ascii=False)

        logger.info(f"Saved run report to {output_file}")
        return output_file
