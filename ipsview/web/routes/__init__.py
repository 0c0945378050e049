"""ipsview web API routes"""
