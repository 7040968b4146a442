"""Shared types, constants, errors, logging and audit for chunkvault."""
