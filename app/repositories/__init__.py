"""Paquete de repositorios: capa de consultas a la base de datos.

Repository package. Contains the classes that run pure database
operations. Catalog-style repositories extend BaseRepository for generic
reads and add the domain queries of the reserve-adjustment engine.
"""
