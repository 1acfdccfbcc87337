"""
latentcorr.core
===============

Shared building blocks: typed names, the error taxonomy and the 2x2
`ContingencyTable` data model.
"""
