"""
Core architecture components shared by every domain of the e-commerce backend
"""
