"""
Joke generation core: catalog, prompt, upstream call and output repair.
"""
