"""SOFI furniture storefront: public catalog and admin back-office."""

__version__ = "0.1.0"
