"""Static site assets.

This module builds the icon sprite sheet and indexes manual documents.
It feeds icon coordinates and sheet URLs into catalog assembly.
"""
