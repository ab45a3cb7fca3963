"""
Main pipeline orchestrator for the record transform.

Coordinates loading, validating, transforming and writing a single provider
verification record.
"""

import argparse
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from src.ingestion.record_loader import load_record, write_record
from src.ingestion.schema_validator import validate_provider_record
from src.normalize.config import (
    DEFAULT_CONFIG_PATH, get_default_normalization_config,
    load_normalization_config, validate_normalization_config
)
from src.pipeline.assembler import transform
from src.reporting.license_report import build_license_frame, export_license_report, summarize_by_state

logger = logging.getLogger(__name__)


class RecordTransformPipeline:
    """
    Pipeline orchestrator for the record transform.

    Runs each stage with timing and logging; any stage failure is logged
    and re-raised so that no output is written for a failed record.
    """

    def __init__(self, config_path: str = DEFAULT_CONFIG_PATH):
        """
        Initialize pipeline with configuration.

        Args:
            config_path: Path to configuration file
        """
        self.config_path = config_path
        self.config = self._load_config()

        # Pipeline state
        self.pipeline_start_time = None
        self.stage_times = {}
        self.stage_durations = {}

        logger.info("Initialized RecordTransformPipeline")

    def _load_config(self) -> Dict:
        """Load and validate configuration, falling back to defaults."""
        config = load_normalization_config(self.config_path)
        if not validate_normalization_config(config):
            logger.error(f"Invalid configuration in {self.config_path}, using defaults")
            return get_default_normalization_config()
        return config

    def _start_stage_timer(self, stage_name: str):
        """Start timing for a pipeline stage."""
        self.stage_times[stage_name] = time.time()
        logger.info(f"Starting stage: {stage_name}")

    def _end_stage_timer(self, stage_name: str):
        """End timing for a pipeline stage."""
        if stage_name in self.stage_times:
            duration = time.time() - self.stage_times[stage_name]
            self.stage_durations[stage_name] = duration
            logger.info(f"Completed stage: {stage_name} in {duration:.3f} seconds")

    def default_output_path(self, input_path: str) -> Path:
        """Output path next to the input, e.g. sample.json -> sample_proposed.json."""
        source = Path(input_path)
        suffix = self.config.get("output", {}).get("suffix", "_proposed")
        return source.with_name(f"{source.stem}{suffix}{source.suffix or '.json'}")

    def ingest_record(self, input_path: str) -> Dict[str, Any]:
        """
        Load the raw record.

        Args:
            input_path: Path to input JSON document

        Returns:
            Raw record mapping
        """
        self._start_stage_timer("record_ingestion")

        try:
            raw_record = load_record(input_path)
            self._end_stage_timer("record_ingestion")
            return raw_record

        except Exception as e:
            logger.error(f"Record ingestion failed: {e}")
            raise

    def validate_record(self, raw_record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate the raw record structure.

        Args:
            raw_record: Raw record mapping

        Returns:
            Validation summary
        """
        self._start_stage_timer("record_validation")

        try:
            summary = validate_provider_record(raw_record, self.config.get("validation", {}))
            self._end_stage_timer("record_validation")
            return summary

        except Exception as e:
            logger.error(f"Record validation failed: {e}")
            raise

    def transform_record(self, raw_record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Transform the raw record into its canonical shape.

        Args:
            raw_record: Raw record mapping

        Returns:
            Canonical record
        """
        self._start_stage_timer("record_transform")

        try:
            canonical = transform(raw_record, self.config.get("normalization", {}))
            self._end_stage_timer("record_transform")
            return canonical

        except Exception as e:
            logger.error(f"Record transform failed: {e}")
            raise

    def save_results(self, canonical: Dict[str, Any], output_path: Path,
                     licenses_csv: Optional[str] = None):
        """Write the canonical record and the optional license report."""
        self._start_stage_timer("record_output")

        try:
            write_record(canonical, output_path, indent=self.config.get("output", {}).get("indent", 2))
            if licenses_csv:
                export_license_report(canonical, licenses_csv)
            self._end_stage_timer("record_output")

        except Exception as e:
            logger.error(f"Writing results failed: {e}")
            raise

    def run_pipeline(self, input_path: str, output_path: Optional[str] = None,
                     licenses_csv: Optional[str] = None) -> Dict[str, Any]:
        """
        Run the complete record transform pipeline.

        Args:
            input_path: Path to input JSON document
            output_path: Path for the canonical record (optional)
            licenses_csv: Path for the license report CSV (optional)

        Returns:
            Pipeline execution report
        """
        self.pipeline_start_time = time.time()
        logger.info(f"Starting record transform pipeline for {input_path}")

        try:
            # 1. Ingestion
            raw_record = self.ingest_record(input_path)

            # 2. Validation
            validation_summary = self.validate_record(raw_record)

            # 3. Transform
            canonical = self.transform_record(raw_record)

            # 4. Output
            destination = Path(output_path) if output_path else self.default_output_path(input_path)
            self.save_results(canonical, destination, licenses_csv)

            total_duration = time.time() - self.pipeline_start_time
            logger.info(f"Pipeline completed successfully in {total_duration:.3f} seconds")

            state_summary = summarize_by_state(build_license_frame(canonical))
            metadata = canonical["profileMetadata"]
            return {
                "pipeline_execution": {
                    "start_time": datetime.fromtimestamp(self.pipeline_start_time).isoformat(),
                    "end_time": datetime.now().isoformat(),
                    "stage_times": self.stage_durations,
                    "total_duration": total_duration
                },
                "input_path": str(input_path),
                "output_path": str(destination),
                "licenses_csv": licenses_csv,
                "validation": validation_summary,
                "license_count": len(canonical["licenses"]),
                "states": metadata["states"],
                "has_board_action": metadata["hasBoardAction"],
                "state_summary": state_summary.to_dict(orient="index")
            }

        except Exception as e:
            logger.error(f"Pipeline failed: {e}")
            raise


def main(argv=None):
    """Main entry point for the record transform pipeline."""
    parser = argparse.ArgumentParser(description="Provider Verification Record Transform")
    parser.add_argument("--input", required=True, help="Input JSON document path")
    parser.add_argument("--output", help="Output JSON path (default: <input>_proposed.json)")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Configuration file path")
    parser.add_argument("--licenses-csv", help="Write a license report CSV to this path")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    args = parser.parse_args(argv)

    # Ensure log directory exists before the file handler opens it
    Path("logs").mkdir(exist_ok=True)

    # Setup logging
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler("logs/record_transform.log")
        ]
    )

    try:
        pipeline = RecordTransformPipeline(args.config)
        report = pipeline.run_pipeline(
            input_path=args.input,
            output_path=args.output,
            licenses_csv=args.licenses_csv
        )

        # Print summary
        print("\n" + "="*50)
        print("RECORD TRANSFORM SUMMARY")
        print("="*50)
        print(f"Licenses: {report['license_count']:,}")
        print(f"States: {', '.join(map(str, report['states'])) or '-'}")
        print(f"Board Action: {'yes' if report['has_board_action'] else 'no'}")
        for state, counts in report["state_summary"].items():
            print(f"  {state}: {counts['licenses']} licenses, {counts['boardActions']} with board action")
        print(f"Validation Warnings: {report['validation']['warning_count']:,}")
        print(f"Output: {report['output_path']}")
        print(f"Total Duration: {report['pipeline_execution']['total_duration']:.3f} seconds")
        print("="*50)

    except Exception as e:
        logger.error(f"Record transform failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
