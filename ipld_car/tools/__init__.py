"""
Command line tools for ipld_car.
"""
