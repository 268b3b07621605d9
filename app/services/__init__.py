# Services package init
"""
Quai Antique API — Services Layer
===================================

What:  Business logic between routes (HTTP) and the database.

Service Inventory:
    - UserStore (abstract) / SqlAlchemyUserStore: user persistence port
    - AuthService: registration, login, profile fetch and edit
    - CatalogService / FoodService: generic CRUD for the restaurant catalog
"""
