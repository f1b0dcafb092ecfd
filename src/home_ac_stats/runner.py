"""
home-ac-stats entry point.

Fetches Sensibo device readings and the outside temperature once, publishes
them to Google Cloud Monitoring and exits. Scheduling is left to whatever
invokes the job.
"""
import argparse
import logging
import sys
from typing import List, Optional

from .api_client import APIError, OpenMeteoClient, SensiboClient
from .config import Config, ConfigError
from .exporter import ExporterError, ExporterLifecycle
from .metrics import MetricsError, MetricsRecorder
from .utils import setup_logging


logger = logging.getLogger(__name__)


def run(
    config: Config,
    sensibo: Optional[SensiboClient] = None,
    weather: Optional[OpenMeteoClient] = None,
    lifecycle: Optional[ExporterLifecycle] = None,
) -> int:
    """
    Run one collection pass.

    The exporter is flushed and stopped when this returns or raises.

    Args:
        config: Loaded configuration
        sensibo: Device API client (built from config if omitted)
        weather: Weather API client (built from config if omitted)
        lifecycle: Exporter lifecycle (built from config if omitted)

    Returns:
        Number of devices recorded

    Raises:
        ConfigError, ExporterError, APIError, MetricsError: On any fatal condition
    """
    if sensibo is None:
        sensibo = SensiboClient(config.api_key, timeout=config.http_timeout)
    if weather is None:
        weather = OpenMeteoClient(
            config.latitude, config.longitude, timeout=config.http_timeout
        )
    if lifecycle is None:
        lifecycle = ExporterLifecycle(
            config.project_id,
            MetricsRecorder.views(),
            export_interval_millis=config.export_interval_millis,
            metric_prefix=config.metric_prefix,
        )

    try:
        with lifecycle:
            recorder = MetricsRecorder(lifecycle.meter_provider)

            devices = sensibo.get_devices()

            try:
                reading = weather.get_current_temperature()
            except APIError as e:
                logger.warning(f"failed to get outside temperature: {e}")
            else:
                recorder.record_outside_temperature(reading)

            return recorder.record_devices(devices)
    finally:
        sensibo.close()
        weather.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the collection job."""
    parser = argparse.ArgumentParser(
        description="Publish Sensibo AC readings and outside temperature to Cloud Monitoring"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to YAML configuration file (default: environment variables only)"
    )
    args = parser.parse_args(argv)

    setup_logging()

    # Load configuration
    try:
        if args.config:
            config = Config.load_from_file(args.config)
        else:
            config = Config.load_from_env()
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    # Setup logging
    log_config = config.get_logging_config()
    setup_logging(
        log_level=log_config["level"],
        log_file=log_config["file"],
        log_format=log_config["format"],
    )
    logger.debug(f"Configuration: {config.to_dict(sanitize=True)}")

    try:
        count = run(config)
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 1
    except ExporterError as e:
        logger.error(f"Exporter error: {e}")
        return 1
    except APIError as e:
        logger.error(f"Failed to get devices: {e}")
        return 1
    except MetricsError as e:
        logger.error(f"Metrics error: {e}")
        return 1
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1

    logger.info(f"Recorded {count} device(s)")
    print("success")
    return 0


if __name__ == "__main__":
    sys.exit(main())
