"""
latentcorr.backends
===================

Data-frame backends that turn raw fields into contingency tables.
"""
