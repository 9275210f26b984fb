"""access-log-analyzer — filter, sort and summarize web access logs."""

from access_log_analyzer.cli import main

if __name__ == "__main__":
    main()
