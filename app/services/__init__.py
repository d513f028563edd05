"""Paquete de servicios: capa de lógica de negocio.

Service package. Services orchestrate the business rules of the reserve
adjustment, call repositories for database work and flush; routers commit.
"""
