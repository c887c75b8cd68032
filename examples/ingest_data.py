"""Example script synchronizing exported iRacing data into Neo4j."""

import sys
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

# Add parent directory to path to import iracing_graph package
sys.path.append(str(Path(__file__).parent.parent))

# Load environment variables before the package reads its configuration
load_dotenv()

from iracing_graph import config
from iracing_graph.logger import configure_logging
from iracing_graph.services import services_from_env


def main():
    """Main synchronization script.

    Reads ``cars.json`` and ``tracks.json`` from ``IRACING_DATA_DIR``
    (see examples/data for the expected shape) and writes every record
    in its own transaction.
    """
    configure_logging(config.LOG_LEVEL)

    services = services_from_env()
    start_time = datetime.now()

    try:
        results = services.sync.sync_all()
    finally:
        services.close()

    elapsed_ms = (datetime.now() - start_time).total_seconds() * 1000

    for label, result in results.items():
        if result.fetch_error:
            print(f"\n{label}: could not read records: {result.fetch_error.message}")
            continue
        print(f"\n{label}: {result.synced}/{result.total} synced, {result.failed} failed")
        for failure in result.errors:
            print(f"\t#{failure.index} (id={failure.id}) {failure.error}: {failure.message}")

    print("\nSync complete!")
    print(f"Total processing time: {elapsed_ms:.2f}ms")


if __name__ == "__main__":
    main()
