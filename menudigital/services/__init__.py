"""
                        Services Module

External collaborators, each with a local (development) and a hosted
(production) implementation selected by ENV_MODE:

    - auth: account sign-up / sign-in / sessions
    - storage: logo upload and public URLs
    - kv: shopper-side key-value storage (carts)

plus the catalog service working on the application database.
"""
