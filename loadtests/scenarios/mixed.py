"""Mixed storefront workload scenario.

Combines the storefront journeys with weights that model realistic traffic.
This is the recommended scenario for load baseline testing.
"""

from locust import HttpUser, between

from loadtests.scenarios.storefront import (
    BrowseCatalogueJourney,
    CartEditingJourney,
    CatalogueAdminJourney,
    CheckoutJourney,
)


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload simulating concurrent storefront activity.

    Weight distribution:
    - Browsing (50%): read-only catalogue traffic, the most common
    - Cart editing (25%): add, change and abandon without buying
    - Checkout (20%): conversion, contends for stock
    - Catalogue admin (5%): new products, restocks, deletions
    """

    wait_time = between(0.5, 3.0)
    tasks = {
        BrowseCatalogueJourney: 10,
        CartEditingJourney: 5,
        CheckoutJourney: 4,
        CatalogueAdminJourney: 1,
    }
