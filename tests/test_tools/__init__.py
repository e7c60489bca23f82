"""
Test Tools Package
Tests for the tools module (scheduler, interaction checker, network probe)
"""
