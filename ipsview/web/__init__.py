"""
ipsview Web API

FastAPI surface over the crash report decoder.
"""
