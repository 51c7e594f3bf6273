import json

from django.core.management.base import BaseCommand, CommandError

from storefront.catalog import get_product
from storefront.services.checkout import CheckoutController
from storefront.services.exceptions import CheckoutError, UnknownProductError
from storefront.services.razorpay import checkout_script_url
from storefront.services.script_loader import load_script


class Command(BaseCommand):
    help = "Probe the hosted checkout script and dry-run a checkout for one product"

    def add_arguments(self, parser):
        parser.add_argument("--url", default="", help="Script URL (defaults to the configured checkout bundle)")
        parser.add_argument("--timeout", type=int, default=10)
        parser.add_argument("--product", default="", help="Catalog id to dry-run (e.g. DA-001)")

    def handle(self, *args, **options):
        url = options["url"] or checkout_script_url()
        timeout = options["timeout"]

        self.stdout.write(self.style.WARNING(f"Probing {url} ..."))

        def loader(src):
            return load_script(src, timeout=timeout)

        if not loader(url):
            raise CommandError(f"Checkout script is not reachable: {url}")

        self.stdout.write(self.style.SUCCESS("✅ Checkout script reachable."))

        product_id = (options["product"] or "").strip()
        if not product_id:
            return

        try:
            product = get_product(product_id)
        except UnknownProductError as exc:
            raise CommandError(str(exc)) from exc

        # Throwaway in-memory session: nothing is persisted.
        controller = CheckoutController({})
        try:
            payload = controller.buy_now(product, loader=lambda src: loader(url))
        except CheckoutError as exc:
            raise CommandError(exc.alert or str(exc)) from exc

        self.stdout.write(json.dumps(payload["options"], indent=2, ensure_ascii=False))
        self.stdout.write(self.style.SUCCESS(f"✅ Checkout options built for {product.id}."))
