"""Crowd-sourced store price reports service"""
