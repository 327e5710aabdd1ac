"""Process entry point: print the liveness check."""

import json

from planner_app.app import WardrobePlannerApp


def main() -> None:
    app = WardrobePlannerApp()
    print(json.dumps(app.healthcheck()))


if __name__ == "__main__":
    main()
