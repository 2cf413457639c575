"""Command line interface for deploy-stager"""
