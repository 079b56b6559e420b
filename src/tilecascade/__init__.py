"""Headless match-three board core: match detection, swaps and cascade resolution."""
