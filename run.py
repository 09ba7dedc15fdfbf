"""Development server for the salon agenda API."""
from __future__ import annotations

import logging
import os

from salon_agenda import create_app
from salon_agenda.credentials import CredentialStore
from salon_agenda.extensions import db

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("salon_agenda.run")


def main() -> None:
    flask_app = create_app()
    prefix = flask_app.config["API_PREFIX"]

    api_rules = [rule for rule in flask_app.url_map.iter_rules() if rule.rule.startswith(prefix)]
    logger.info("Serving %d API routes under %s", len(api_rules), prefix)

    with flask_app.app_context():
        if not CredentialStore(db.session).setup_complete():
            logger.warning("No admin yet: POST %s/auth/setup to create the first one", prefix)

    debug_enabled = os.environ.get("FLASK_DEBUG", "0") in {"1", "true", "True"}
    flask_app.run(host="0.0.0.0", port=int(os.environ.get("PORT", 3001)), debug=debug_enabled)


if __name__ == "__main__":
    main()
