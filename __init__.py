"""
Bible Map application.

A FastAPI service for browsing biblical persons, locations, events, journeys
and themes on an interactive map.
"""
