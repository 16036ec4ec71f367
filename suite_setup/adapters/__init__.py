"""
Adapters — the seams between the installer and the outside world.

``shell`` runs external commands (package managers, compose, crontab);
``prompt`` asks the operator questions.
"""
