# thethought/__init__.py
"""
TheThought: API de una red social pequeña (thoughts, reels, follows,
comentarios, likes, shares y mensajes directos) más su variante offline.
"""
