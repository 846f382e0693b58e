"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) para capacidades inyectadas, como el canal de
  eventos de autenticación.
- El Core depende de abstracciones, no de la UI que escucha.
"""
