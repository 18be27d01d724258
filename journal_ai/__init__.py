"""Journal AI backend"""
