"""
Pixel Rush
==========

Single-screen arcade coin collector. The player square sweeps up coins
that spawn across an 800x600 board; consecutive coins of the same type
merge into a more valuable coin, score and prize pool grow, spawns speed
up with score, and the best rounds land on a local leaderboard.

All tunable parameters are in game_config.yaml.
"""
