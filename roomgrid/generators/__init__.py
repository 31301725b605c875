"""
Layout generators: grid types, room templates, instantiation and the placement search.
"""
