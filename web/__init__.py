"""
Web API for the house value engine.
"""
