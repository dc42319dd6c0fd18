"""
Customers module.

- Customer entity (id, name, address)
- CustomerRepository: CRUD + case-insensitive name search over a Session
- JSON blueprint exposing the repository at /customers
"""
