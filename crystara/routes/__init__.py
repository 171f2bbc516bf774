"""Flask blueprints for the storefront API."""
