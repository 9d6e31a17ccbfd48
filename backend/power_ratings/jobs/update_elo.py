import logging
import os
import sys

from power_ratings.db import init_db
from power_ratings.elo_update import recompute_all
from power_ratings.sports import enabled_sports

logger = logging.getLogger("power_ratings.jobs.update_elo")


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    init_db()

    try:
        sports = enabled_sports()
    except ValueError as e:
        logger.error("[cron] Bad ELO_SPORTS: %s", e)
        sys.exit(2)

    workers = int(os.getenv("ELO_WORKERS", "1"))
    logger.info("[cron] Recomputing Elo for %s", ", ".join(sports))

    result = recompute_all(sports, workers=workers)

    for sport, r in result["results"].items():
        top = ", ".join(f"{t['team']} {t['elo']}" for t in r["top_teams"]) or "-"
        logger.info("[cron] %s: %d games, %d published (top: %s)", sport, r["games"], r["updated"], top)

    if not result["ok"]:
        for sport, err in result["failed"].items():
            logger.error("[cron][ERROR] %s failed: %s", sport, err)
        sys.exit(1)

    logger.info("[cron] Elo update complete")


if __name__ == "__main__":
    main()
