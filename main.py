'''
Orchestrator

Single responsibility: glue the pipeline together.

Responsibilities:
- Parse CLI arguments
- Call each pipeline stage in order
- Print the issuer collection before and after enrichment
- Run the concurrency demos on request

This file contains no business logic.
'''
import argparse
import json
import os
import sys


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Issuer enrichment pipeline")
    p.add_argument("input", nargs="?", help="Issuer document JSON path")
    p.add_argument("--outdir", "-o", default="out")
    p.add_argument("--sample", action="store_true", help="Use the built-in sample document")
    p.add_argument("--workers", type=int, default=None, help="Thread pool capacity")
    p.add_argument("--latency", type=float, default=None, help="Mock service latency in seconds")
    p.add_argument("--fail-id", type=int, action="append", dest="fail_ids", help="Issuer id the mock service fails")
    p.add_argument("--hello-workers", type=int, metavar="N", help="Run the multiprocessing hello demo and exit")
    p.add_argument("--compare", action="store_true", help="Time sequential vs pooled enrichment and exit")
    p.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    p.add_argument("--log-format", default=None, choices=["console", "json"])
    return p.parse_args(argv)


from ISSUERS.Ingest.loader import load_document
from ISSUERS.Enrichment.enricher import enrich, _get_config_loader
from ISSUERS.Enrichment.mock_service import build_service_from_config
from ISSUERS.Observability.log_config import configure_logging
from ISSUERS.Render.render import render_issuers_table
from ISSUERS.Reporting.document_exporter import export_document
from ISSUERS.Reporting.summary_renderer import render_summary
from ISSUERS.Timeline.timeline_manager import TimelineManager
from ISSUERS.Workers.hello import run_hello_workers
from ISSUERS.Workers.timing import compare_sequential_vs_pooled


def main(argv=None):
    args = parse_args(argv)
    config = _get_config_loader()
    configure_logging(args.log_level or config.get_log_level(), args.log_format or config.get_log_format())

    if args.hello_workers is not None:
        for message in run_hello_workers(args.hello_workers):
            print(message)
        return 0

    if args.compare:
        result = compare_sequential_vs_pooled(
            latency_seconds=args.latency if args.latency is not None else 0.2,
            max_workers=config.get_max_workers() if args.workers is None else args.workers,
        )
        print(json.dumps(result, indent=2))
        return 0

    os.makedirs(args.outdir, exist_ok=True)
    timeline = TimelineManager()

    document = load_document(path=args.input, use_sample=args.sample)
    document = timeline.initialize(document)
    document = timeline.add_entry(document, "ingest", f"Document loaded: {len(document['issuers'])} issuers")

    print("Before enrichment:")
    print(render_issuers_table(document["issuers"]))

    service = build_service_from_config(config, latency_seconds=args.latency, failing_ids=args.fail_ids)
    document = enrich(document, service=service, max_workers=args.workers)
    summary = document["enrichment"]["summary"]
    document = timeline.add_entry(
        document, "enrich", f"Enriched {summary['succeeded']}/{summary['total']}, failed {summary['failed']}"
    )

    print("\nAfter enrichment:")
    print(render_issuers_table(document["issuers"]))
    for failure in document["enrichment"]["failures"]:
        print(f"Issuer {failure['id']} not enriched: {failure['reason']}", file=sys.stderr)

    document = timeline.add_entry(document, "report", "Exported document and summary")
    exported = export_document(document, args.outdir)
    rendered = render_summary(document, args.outdir)
    return 0 if exported and rendered else 1

if __name__ == "__main__":
    sys.exit(main())
