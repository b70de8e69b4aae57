"""
Storage Module
-------------
Handles on-disk persistence of the provider configuration.
"""
