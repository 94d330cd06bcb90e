"""Miscellaneous utility routines"""
