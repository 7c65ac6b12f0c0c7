"""Metric instruments, registry and the SignalFx flush cycle"""
