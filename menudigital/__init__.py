"""
                MenuDigital

Multi-tenant digital menu and ordering service. Restaurant owners
manage their catalog through an admin API, shoppers browse a public
menu, build a cart and send the order through a WhatsApp link.
"""

__version__ = "1.0.0"
