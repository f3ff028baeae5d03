import sys
import logging

from config import get_settings
from csv_codec import write_accounts
from engine import create_engine
from payments_engine import PaymentsEngine


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main():
    if len(sys.argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        sys.exit(1)

    settings = get_settings()
    configure_logging(settings.log_level)

    filepath = sys.argv[1]
    payments_engine = PaymentsEngine(
        num_consumers=settings.num_consumers,
        engine=create_engine(settings.engine_mode),
    )

    try:
        accounts = payments_engine.process_file(filepath)
    except (OSError, UnicodeDecodeError) as e:
        print(f"Cannot read {filepath}: {e}", file=sys.stderr)
        sys.exit(1)

    write_accounts(accounts, sys.stdout)

    # Print final processing report to stderr
    stats = payments_engine.stats
    print(f"Applied: {stats.applied}, Rejected: {stats.rejected}", file=sys.stderr)


if __name__ == "__main__":
    main()
