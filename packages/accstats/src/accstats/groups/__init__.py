"""
Feature groups. One module per group, each exposing compute(epoch).

Column names and order live in ../feature_configs/<group>.yaml.
"""
