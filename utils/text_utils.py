# utils/text_utils.py


def split_string(text: str, size: int, separator: str = "\r\n") -> list[str]:
    """
    Splits text into chunks of at most `size` characters so each fits in one
    Discord message.

    Cuts at the last `separator` within the window, dropping the separator
    itself. When the window has no separator the text is hard-cut after
    `size - 1` characters. The remainder is always returned as the final
    chunk, even when empty.
    """
    if not separator:
        raise ValueError("separator must not be empty")
    if size < 2:
        raise ValueError("size must be at least 2")

    chunks = []
    while len(text) > size:
        cut = text.rfind(separator, 0, size)
        if cut == -1:
            cut = size - 1
            chunks.append(text[:cut])
            text = text[cut:]
        else:
            chunks.append(text[:cut])
            text = text[cut + len(separator):]
    chunks.append(text)
    return chunks
