"""
Command-line entry point.

Usage:
    business-dna https://peakfitness.com --output peak.json
    business-dna peakfitness.com --static --no-vision --max-pages 5
    business-dna https://peakfitness.com --name "Peak Fitness" --site-identity
"""

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from business_dna.collectors.renderer import PlaywrightRenderer, StaticRenderer
from business_dna.config import TotalContentConfig
from business_dna.exceptions import BusinessDNAError
from business_dna.extractors.colors import LogoPaletteExtractor
from business_dna.pipeline import BusinessDNAPipeline
from business_dna.utils.logger import PipelineLogger, configure_global_logging
from business_dna.vision.client import HttpVisionClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Extract a business identity (Business DNA) from its website")
    parser.add_argument("url", help="Business website URL (scheme optional)")
    parser.add_argument("--name", type=str, default=None, help="Known business name, wins over anything extracted")
    parser.add_argument("--max-pages", type=int, default=None, help="Maximum pages to crawl (default: 12)")
    parser.add_argument("--max-depth", type=int, default=None, help="Maximum link depth from the seed (default: 3)")
    parser.add_argument("--crawl-timeout", type=float, default=None, help="Whole-crawl budget in seconds (default: 180)")
    parser.add_argument("--static", action="store_true", help="Fetch pages with requests instead of a headless browser")
    parser.add_argument("--no-vision", action="store_true", help="Skip vision analysis even if VISION_SERVICE_URL is set")
    parser.add_argument("--site-identity", action="store_true", help="Write the lighter SiteIdentity shape")
    parser.add_argument("--output", "-o", type=str, default=None, help="Write JSON here instead of stdout")
    parser.add_argument("--log-level", type=str, default="INFO", help="DEBUG, INFO, WARNING or ERROR (default: INFO)")
    return parser


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    configure_global_logging(args.log_level)
    logger = PipelineLogger("business_dna", log_level=args.log_level, stage="Extract")

    try:
        config = TotalContentConfig.from_env(
            max_pages=args.max_pages,
            max_depth=args.max_depth,
            crawl_timeout=args.crawl_timeout,
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    vision_client = None if args.no_vision else HttpVisionClient.from_env()
    if vision_client is None and not args.no_vision:
        logger.info("VISION_SERVICE_URL not set, images will not be enriched")

    renderer = StaticRenderer() if args.static else PlaywrightRenderer()
    try:
        with renderer:
            pipeline = BusinessDNAPipeline(
                renderer,
                vision_client=vision_client,
                config=config,
                logger=logger,
                logo_palette=LogoPaletteExtractor(),
            )
            dna = pipeline.run(args.url, business_name_hint=args.name)
    except BusinessDNAError as e:
        logger.error(f"Extraction failed: {e}")
        return 1
    finally:
        if vision_client is not None:
            vision_client.close()

    record = dna.to_site_identity() if args.site_identity else dna
    payload = json.dumps(record.model_dump(mode="json"), indent=2, ensure_ascii=False)

    if args.output:
        Path(args.output).write_text(payload + "\n", encoding="utf-8")
        logger.info(f"Wrote {args.output}")
    else:
        print(payload)

    summary = logger.get_error_summary()
    if summary["total_warnings"]:
        logger.info(f"Run finished with {summary['total_warnings']} warnings")
    return 0


if __name__ == "__main__":
    sys.exit(main())
