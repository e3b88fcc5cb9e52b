"""Feature modules for the storefront SEO toolkit."""
