import logging
import os
from pathlib import Path

from event_planner.core.calculations.pricing_engine import PricingEngine
from event_planner.core.services.catalog import HttpCategoryCatalog, JsonCategoryCatalog, load_catalog
from event_planner.core.services.drafts import JsonDraftStore
from event_planner.core.services.http import build_session
from event_planner.core.services.package_store import PackageStore
from event_planner.core.services.recommendations import CatalogRecommendationSource, HttpRecommendationSource
from event_planner.core.services.settings import API_URL_ENV, load_settings
from event_planner.core.services.submission import HttpSubmissionSink
from event_planner.core.services.vendor_filters import VendorFilters
from event_planner.core.services.vendor_selection import VendorSelectionController
from event_planner.core.wizard.forms import service_card_wizard, vendor_services_wizard
from event_planner.ui.layouts.main_window import MainWindow

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(
        level=os.environ.get("EVENT_PLANNER_LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings()
    api = settings["api"]
    timeout = (float(api["connect_timeout"]), float(api["read_timeout"]))
    drafts_dir = Path(settings["drafts"]["path"]).expanduser()

    if os.environ.get(API_URL_ENV):
        source = HttpRecommendationSource(api["base_url"], build_session(), timeout)
        categories = HttpCategoryCatalog(api["base_url"], build_session(), timeout)
        logger.info("Using recommendations API at %s", api["base_url"])
    else:
        catalog = load_catalog()
        source = CatalogRecommendationSource(catalog)
        categories = JsonCategoryCatalog(catalog)
        logger.info("Using local catalog for recommendations")

    store = PackageStore(PricingEngine.from_settings(settings))
    controller = VendorSelectionController(store, source, VendorFilters.from_settings(settings))

    session = build_session(retries=0)

    def new_service_card():
        sink = HttpSubmissionSink(api["base_url"], "/api/vendor-cards", session, timeout=timeout)
        return service_card_wizard(sink, JsonDraftStore(drafts_dir, "service_card"))

    def new_vendor_services():
        sink = HttpSubmissionSink(api["base_url"], "/api/vendor/services", session, json_body=True, timeout=timeout)
        return vendor_services_wizard(sink, JsonDraftStore(drafts_dir, "vendor_services"))

    app = MainWindow(
        controller,
        wizards={"Create service card": new_service_card, "Vendor services setup": new_vendor_services},
        categories=categories,
    )
    app.mainloop()


if __name__ == "__main__":
    main()
