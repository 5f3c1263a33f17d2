from deckhand import invoke


if __name__ == '__main__':
    invoke(prog="main.py")
