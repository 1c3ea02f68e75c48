# This file makes the 'utils' directory a Python package
# It holds the storage engine: objects, index, trees, refs, commits and checkout
