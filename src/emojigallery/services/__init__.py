"""Headless services: event bus, observables, dispatch, settings, logging, errors."""
