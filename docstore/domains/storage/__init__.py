"""Хранилища содержимого и выбор активного хранилища"""
