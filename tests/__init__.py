"""
configstore test suite.
"""
