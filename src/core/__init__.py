"""Core domain package for git-precommit-checks.

Core contains diff parsing, rule compilation and matching logic without any
git or console-specific code, keeping the business logic portable.
"""
