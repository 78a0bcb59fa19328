"""The standard Liquid filters, including sort and sort_natural."""