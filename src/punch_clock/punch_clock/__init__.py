"""Punch Clock package.

Organized by feature modules (timecards, punches, costcodes, ...) with a thin
Flask controller layer over service/repository layers.
"""
