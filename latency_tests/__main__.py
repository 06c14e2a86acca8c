from latency_tests.cli import main

# Allows: python -m latency_tests URL [CONCURRENCY] ...
if __name__ == "__main__":
    raise SystemExit(main())
