from django.conf import settings


def fetch_in_pages(queryset, page_size=None):
    '''
    Read a queryset in fixed-size slices and return the concatenated rows.

    Stops as soon as a page comes back shorter than the page size, so an
    exact multiple of the page size costs one extra (empty) read.
    '''
    page_size = page_size or settings.RECORD_PAGE_SIZE
    rows = []
    start = 0
    while True:
        page = list(queryset[start:start + page_size])
        rows.extend(page)
        if len(page) < page_size:
            break
        start += page_size
    return rows
